"""Base collector"""
import socket
from abc import ABC, abstractmethod
from typing import List, Dict
from metrics.models import CollectionWarnings, MetricValue

class BaseCollector(ABC):
    """Base class for all metric collectors"""
    
    def __init__(self, config=None, name: str = "", help_text: str = ""):
        self.config = config or {}
        self._name = name
        self._help_text = help_text
    
    @abstractmethod
    def collect(self, warnings: CollectionWarnings) -> None:
        """Run one collection pass, recording non-fatal issues in warnings"""
        pass
    
    @abstractmethod
    def to_metrics(self) -> List[MetricValue]:
        """Convert the last completed collection pass to MetricValue objects"""
        pass
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def help_text(self) -> str:
        return self._help_text or f"{self.name} metrics collector"
    
    def is_enabled(self) -> bool:
        """Check if this collector is enabled"""
        if hasattr(self.config, 'enabled_collectors'):
            return self.name in self.config.enabled_collectors
        return True
    
    def get_standard_labels(self, additional_labels: Dict[str, str] = None) -> Dict[str, str]:
        """Get standard labels attached to every metric"""
        hostname = socket.gethostname()
        labels = {
            "host_name": hostname,
            "instance": hostname,
        }
        
        if additional_labels:
            labels.update(additional_labels)
            
        return labels

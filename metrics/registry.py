"""Metrics registry for managing collectors and orchestrating collection"""
from typing import Dict, List
from .models import CollectionWarnings, MetricValue
from collectors.base import BaseCollector
from logging_config import get_logger


logger = get_logger(__name__)


class CollectionResult:
    """Outcome of collecting from all enabled collectors"""
    
    def __init__(self, metrics: List[MetricValue], warnings: CollectionWarnings, failed: Dict[str, Exception]):
        self.metrics = metrics
        self.warnings = warnings
        self.failed = failed
    
    @property
    def is_success(self) -> bool:
        return not self.failed


class MetricsRegistry:
    """Central registry for all metric collectors"""
    
    def __init__(self, config=None):
        self.config = config
        self.collectors: Dict[str, BaseCollector] = {}
    
    def register_collector(self, collector: BaseCollector):
        """Register a new collector"""
        if not isinstance(collector, BaseCollector):
            raise ValueError("Collector must inherit from BaseCollector")
        
        self.collectors[collector.name] = collector
        logger.info("Registered collector", collector=collector.name)
    
    def get_collector(self, name: str) -> BaseCollector:
        """Get collector by name, raising KeyError if none is registered"""
        try:
            return self.collectors[name]
        except KeyError:
            raise KeyError(f"could not find collector: {name}") from None
    
    def list_collectors(self) -> List[str]:
        """List all registered collector names"""
        return list(self.collectors.keys())
    
    def collect_all(self, warnings: CollectionWarnings = None) -> CollectionResult:
        """Collect metrics from all enabled collectors"""
        if warnings is None:
            warnings = CollectionWarnings()
        all_metrics = []
        failed = {}
        
        for name, collector in self.collectors.items():
            if not collector.is_enabled():
                continue
            
            try:
                logger.debug("Collecting metrics", collector=name, event_type="collection_start")
                collector.collect(warnings)
                metrics = collector.to_metrics()
                all_metrics.extend(metrics)
                logger.debug("Collected metrics", collector=name, metrics_count=len(metrics), event_type="collection_complete")
                
            except Exception as e:
                logger.error("Collector failed", collector=name, error=str(e), event_type="collection_error", exc_info=True)
                # Continue with other collectors even if one fails
                failed[name] = e
        
        for message in warnings:
            logger.warning("Collection warning", warning=message, event_type="collection_warning")
        
        return CollectionResult(all_metrics, warnings, failed)

"""Configuration for the ZFS kstat metrics collector"""
import logging
from pathlib import Path
from typing import List, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings

class Config(BaseSettings):
    """Configuration read from environment variables"""
    
    # Collection settings
    zfs_base_path: Path = Field(default=Path("/proc/spl/kstat/zfs"), description="ZFS kstat directory")
    enabled_collectors_str: str = Field(
        default="zfs", 
        description="Enabled collectors (comma-separated)"
    )
    
    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Log file (stdout only when unset)")
    
    # Service identification
    service_name: str = Field(default="zfs-kstat-metrics", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")
    
    class Config:
        env_prefix = ""
        case_sensitive = False
    
    @validator('log_level')
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level
    
    @validator('log_file')
    def ensure_log_directory(cls, v):
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v
    
    @property
    def enabled_collectors(self) -> List[str]:
        """Get enabled collectors as a list"""
        return [item.strip() for item in self.enabled_collectors_str.split(',') if item.strip()]
#!/usr/bin/env python3
"""Main entry point for the ZFS kstat metrics collector"""
import json
import sys
import time
from dataclasses import asdict
from config import Config
from collectors.zfs import ZFSCollector
from metrics.registry import MetricsRegistry
from logging_config import setup_structured_logging, get_logger, log_startup, log_collection, log_error


def metric_to_json(metric) -> str:
    data = asdict(metric)
    data["metric_type"] = metric.metric_type.value
    return json.dumps(data, sort_keys=True)


def main():
    """Run a single collection pass and print the metrics as JSON lines"""
    try:
        config = Config()
        setup_structured_logging(config)
        logger = get_logger(__name__)
        log_startup(logger, config)
        
        registry = MetricsRegistry(config)
        registry.register_collector(ZFSCollector(config))
        
        started = time.monotonic()
        result = registry.collect_all()
        log_collection(
            logger,
            metrics_count=len(result.metrics),
            collection_time=time.monotonic() - started,
            warnings=len(result.warnings),
            errors=len(result.failed)
        )
        
    except Exception as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "startup"})
        return 1
    
    for metric in result.metrics:
        print(metric_to_json(metric))
    for message in result.warnings:
        print(f"WARNING: {message}", file=sys.stderr)
    for name, error in result.failed.items():
        print(f"ERROR: {name}: {error}", file=sys.stderr)
    
    return 0 if result.is_success else 1


if __name__ == '__main__':
    sys.exit(main())

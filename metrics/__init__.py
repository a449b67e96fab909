"""Metric models and collector registry"""

"""Collectors reading ZFS statistics"""

"""Kubernetes resource operations used by the quota tool.

This package contains:
- StorageClass existence checks
- Namespace scope resolution into ResourceQuota objects
- Pure patch computation per intent
- Patch application against the API server
"""

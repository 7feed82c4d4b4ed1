"""Workspace provisioning and membership governance.

Creates tenants atomically with their default group, space, and owner,
allocates globally unique hostnames in hosted deployments, and guards
workspace role changes so every workspace keeps at least one owner.
"""

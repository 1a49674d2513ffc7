"""Credential file management for SMB and NFS mounts."""

from mountctl.credentials.store import CREDENTIAL_MODE, CredentialStore

__all__ = ["CREDENTIAL_MODE", "CredentialStore"]

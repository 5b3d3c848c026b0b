from typing import AbstractSet


def is_trusted(host: str, whitelist: AbstractSet[str]) -> bool:
    """Exact membership only: no wildcard or subdomain matching"""
    return host in whitelist

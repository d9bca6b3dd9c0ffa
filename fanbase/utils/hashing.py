# fanbase/utils/hashing.py
import hashlib

def hash_visitor_ip(ip: str) -> str:
    """One-way SHA-256 digest of a client address, as 64 hex characters"""
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()

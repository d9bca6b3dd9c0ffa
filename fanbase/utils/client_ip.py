# fanbase/utils/client_ip.py
from fastapi import Request
from typing import Dict, Optional

UNKNOWN_IP = "unknown"

def get_client_ip(request: Request) -> str:
    """Extract client IP address from request"""
    # Check for forwarded IP (behind proxy/load balancer)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take the first IP in the chain
        return forwarded_for.split(",")[0].strip() or UNKNOWN_IP

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip() or UNKNOWN_IP

    if request.client:
        return request.client.host
    return UNKNOWN_IP

def request_meta(request: Request) -> Dict[str, Optional[str]]:
    """IP address and user agent for audit entries"""
    ip = get_client_ip(request)
    return {
        "ip_address": None if ip == UNKNOWN_IP else ip,
        "user_agent": request.headers.get("user-agent"),
    }

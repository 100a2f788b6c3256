"""
Request utility functions for extracting client information
"""

from fastapi import Request


def get_client_ip(request: Request) -> str:
    """
    Extract real client IP from request, considering proxy headers

    Args:
        request: FastAPI Request object

    Returns:
        Client IP address as string
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"


def get_user_agent(request: Request) -> str:
    return request.headers.get("User-Agent", "unknown")

"""
Audit trail for security-relevant events and admin actions.

Events go to the ``apps.audit`` logger as structured records; ship that
logger wherever long-term retention is needed.
"""
import logging

from django.db import models

from .utils import client_ip

audit_logger = logging.getLogger("apps.audit")


class AuditAction(models.TextChoices):
    # Authentication events
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    SIGNUP = "SIGNUP"

    # Admin actions
    ADMIN_PRODUCT_CREATE = "ADMIN_PRODUCT_CREATE"
    ADMIN_PRODUCT_UPDATE = "ADMIN_PRODUCT_UPDATE"
    ADMIN_PRODUCT_DELETE = "ADMIN_PRODUCT_DELETE"
    ADMIN_ORDER_UPDATE = "ADMIN_ORDER_UPDATE"
    ADMIN_REVIEW_APPROVE = "ADMIN_REVIEW_APPROVE"
    ADMIN_REVIEW_REJECT = "ADMIN_REVIEW_REJECT"
    ADMIN_REVIEW_DELETE = "ADMIN_REVIEW_DELETE"


def request_metadata(request):
    return {
        "ip": client_ip(request),
        "user_agent": request.META.get("HTTP_USER_AGENT", "unknown"),
    }


def log_audit_event(action, level=logging.INFO, **details):
    payload = {"action": str(action), **details}
    audit_logger.log(level, "[AUDIT] %s", action, extra={"audit": payload})
    return payload


def log_auth_event(action, email, request, success, user_id=None):
    return log_audit_event(
        action,
        logging.INFO if success else logging.WARNING,
        email=email,
        user_id=str(user_id) if user_id else None,
        message=f"{action} {'successful' if success else 'failed'}",
        **request_metadata(request),
    )


def log_admin_action(action, request, resource_id=None, **metadata):
    user = request.user
    return log_audit_event(
        action,
        user_id=str(user.pk),
        email=user.email,
        resource_id=str(resource_id) if resource_id else None,
        metadata=metadata,
        message=f"Admin action: {action}",
        **request_metadata(request),
    )

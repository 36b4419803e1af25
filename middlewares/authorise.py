import logging

logger = logging.getLogger(__name__)

def authorise_admin(event, response, context):
    """Middleware allowing only admin users through. Apply after `authenticate`.

    ---
    x-requires-admin: true
    """
    user = event.get('user')
    if user is None or not user.is_admin:
        logger.info("[Authorisation] Rejected non-admin user %s", getattr(user, 'email', None))
        response.status(403).json({
            "success": False,
            "comment": "FORBIDDEN",
            "error": "This action requires an admin account",
        })
    return event, response, context

"""
Common Error Constants

Centralized error messages for the HTTP layer.
"""

# Event errors
ERROR_UNKNOWN_EVENT = "Unknown event type"
ERROR_UNKNOWN_DRAWER_ACTION = "Unknown drawer action"
ERROR_MODAL_ID_REQUIRED = "modal_id is required for openModal"

# cms/core/context.py

import contextvars

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
current_user_ctx = contextvars.ContextVar("current_user", default=None)

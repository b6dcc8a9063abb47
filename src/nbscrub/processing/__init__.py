"""Policy evaluation and the check and strip engines."""

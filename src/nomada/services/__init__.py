"""
Business services for Nomada.

- identity.py: signup, login, logout, token liveness, password reset
- nomad_id.py: human-readable unique identifier allocation
- saga.py: forward steps with reverse-order compensation
- mailer.py: password-reset email delivery
"""

__all__: list[str] = []

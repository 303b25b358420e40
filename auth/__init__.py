"""
auth — User registration and authentication.

Provides:
  • Password policy validation
  • Password hashing (bcrypt, off the event loop)
  • JWT token creation & verification
  • Registration / authentication services
"""

"""
auth — User authentication module.

Provides:
  • Signed bearer token issuance & verification
  • Password hashing (bcrypt)
  • ``get_identity`` FastAPI dependency guarding protected routes
"""

# scripts/debug.py
import sys

import jwt

from canteen.core.config import settings

# Usage: python -m scripts.debug <token>   (without "Bearer " prefix)
if len(sys.argv) < 2:
    print("❗ Usage: python -m scripts.debug <jwt>")
    sys.exit(1)

token = sys.argv[1]

try:
    decoded = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"], audience=settings.jwt_audience)
    print("✅ Token is valid!")
    print("Decoded payload:")
    print(decoded)
except jwt.ExpiredSignatureError:
    print("❌ Token has expired.")
except jwt.InvalidTokenError as e:
    print(f"❌ Invalid token: {e}")

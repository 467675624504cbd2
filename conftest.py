"""
Root pytest configuration.

Sets environment defaults before any test module imports the settings
singleton, so tests never depend on a developer's .env or real provider keys.
"""

import os
import tempfile

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "aura-analysis-test-logs"))
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
# Keep the default engine and reading store offline in tests
for _key in (
    "GLM_API_KEY", "AURA_GLM_API_KEY", "DEEPSEEK_API_KEY", "AURA_DEEPSEEK_API_KEY", "OPENAI_API_KEY",
    "SUPABASE_URL", "SUPABASE_SERVICE_KEY",
):
    os.environ[_key] = ""

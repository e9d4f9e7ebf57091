import os
from dotenv import load_dotenv

load_dotenv()

# ================== provider =====================
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or ""
GEMINI_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME") or "gemini-2.5-flash-lite"

# ================== server =======================
HOST = os.getenv("HOST") or "0.0.0.0"
PORT = int(os.getenv("PORT") or 3000)
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
CORS_ORIGINS = [o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip()]

# ================== optimizer ====================
OCR_MAX_IMAGE_DIMENSION = int(os.getenv("OCR_MAX_IMAGE_DIMENSION") or 800)
OCR_JPEG_QUALITY = int(os.getenv("OCR_JPEG_QUALITY") or 75)
OCR_PDF_MAX_SIZE_KB = int(os.getenv("OCR_PDF_MAX_SIZE_KB") or 1000)

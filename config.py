# config.py
from dotenv import load_dotenv
import os

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "travel_booking")

# Access and refresh tokens are signed with different keys
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
SECRET_KEY_REFRESH = os.getenv("SECRET_KEY_REFRESH", "change-me-too")
ACCESS_TOKEN_EXPIRES_HOURS = int(os.getenv("ACCESS_TOKEN_EXPIRES_HOURS", "3"))
REFRESH_TOKEN_EXPIRES_HOURS = int(os.getenv("REFRESH_TOKEN_EXPIRES_HOURS", "5"))

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "travel-booking")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3001"))

from .models import AppConfig

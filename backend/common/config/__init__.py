"""Configuration module - re-exports all config values."""
from .paths import *
from .map import *
from .permits import *
from .server import *

# fanbase/models/audit.py
from enum import Enum


class LogLevel(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class AuditAction(str, Enum):
    # Auth
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"

    # Tracks
    CREATE_TRACK = "CREATE_TRACK"
    UPDATE_TRACK = "UPDATE_TRACK"
    DELETE_TRACK = "DELETE_TRACK"
    TOGGLE_TRACK = "TOGGLE_TRACK"
    REORDER_TRACK = "REORDER_TRACK"

    # Videos
    CREATE_VIDEO = "CREATE_VIDEO"
    UPDATE_VIDEO = "UPDATE_VIDEO"
    DELETE_VIDEO = "DELETE_VIDEO"
    TOGGLE_VIDEO = "TOGGLE_VIDEO"

    # Gallery
    CREATE_GALLERY_IMAGE = "CREATE_GALLERY_IMAGE"
    CREATE_GALLERY_IMAGES = "CREATE_GALLERY_IMAGES"
    UPDATE_GALLERY_IMAGE = "UPDATE_GALLERY_IMAGE"
    DELETE_GALLERY_IMAGE = "DELETE_GALLERY_IMAGE"
    TOGGLE_GALLERY_IMAGE = "TOGGLE_GALLERY_IMAGE"
    REORDER_GALLERY = "REORDER_GALLERY"

    # Events
    CREATE_EVENT = "CREATE_EVENT"
    UPDATE_EVENT = "UPDATE_EVENT"
    DELETE_EVENT = "DELETE_EVENT"
    TOGGLE_EVENT = "TOGGLE_EVENT"

    # Products
    CREATE_PRODUCT = "CREATE_PRODUCT"
    UPDATE_PRODUCT = "UPDATE_PRODUCT"
    DELETE_PRODUCT = "DELETE_PRODUCT"
    TOGGLE_PRODUCT = "TOGGLE_PRODUCT"

    # Popups
    CREATE_POPUP = "CREATE_POPUP"
    UPDATE_POPUP = "UPDATE_POPUP"
    DELETE_POPUP = "DELETE_POPUP"
    TOGGLE_POPUP = "TOGGLE_POPUP"

    # Artist / bio
    UPDATE_BIO = "UPDATE_BIO"
    UPDATE_ARTIST = "UPDATE_ARTIST"

    # Hero images
    CREATE_HERO_IMAGE = "CREATE_HERO_IMAGE"
    DELETE_HERO_IMAGE = "DELETE_HERO_IMAGE"
    TOGGLE_HERO_IMAGE = "TOGGLE_HERO_IMAGE"
    REORDER_HERO = "REORDER_HERO"

    # Bio images
    CREATE_BIO_IMAGE = "CREATE_BIO_IMAGE"
    DELETE_BIO_IMAGE = "DELETE_BIO_IMAGE"
    TOGGLE_BIO_IMAGE = "TOGGLE_BIO_IMAGE"

    # Settings
    UPDATE_SETTINGS = "UPDATE_SETTINGS"
    UPDATE_SITE_SETTING = "UPDATE_SITE_SETTING"
    UPDATE_SOCIAL_LINKS = "UPDATE_SOCIAL_LINKS"

    # Messages
    READ_MESSAGE = "READ_MESSAGE"
    DELETE_MESSAGE = "DELETE_MESSAGE"
    REPLY_MESSAGE = "REPLY_MESSAGE"

    # Subscribers
    DELETE_SUBSCRIBER = "DELETE_SUBSCRIBER"
    EXPORT_SUBSCRIBERS = "EXPORT_SUBSCRIBERS"

    # Users
    CREATE_USER = "CREATE_USER"
    DELETE_USER = "DELETE_USER"
    UPDATE_USER = "UPDATE_USER"

    # Email
    UPDATE_EMAIL_SIGNATURE = "UPDATE_EMAIL_SIGNATURE"
    UPDATE_EMAIL_TEMPLATE = "UPDATE_EMAIL_TEMPLATE"
    SEND_ANNOUNCEMENT = "SEND_ANNOUNCEMENT"

    # Press kit
    UPDATE_PRESS_KIT_BIO = "UPDATE_PRESS_KIT_BIO"
    CREATE_PRESS_PHOTO = "CREATE_PRESS_PHOTO"
    UPDATE_PRESS_PHOTO = "UPDATE_PRESS_PHOTO"
    DELETE_PRESS_PHOTO = "DELETE_PRESS_PHOTO"
    TOGGLE_PRESS_PHOTO = "TOGGLE_PRESS_PHOTO"
    REORDER_PRESS_PHOTOS = "REORDER_PRESS_PHOTOS"
    CREATE_MUSIC_HIGHLIGHT = "CREATE_MUSIC_HIGHLIGHT"
    UPDATE_MUSIC_HIGHLIGHT = "UPDATE_MUSIC_HIGHLIGHT"
    DELETE_MUSIC_HIGHLIGHT = "DELETE_MUSIC_HIGHLIGHT"
    REORDER_MUSIC_HIGHLIGHTS = "REORDER_MUSIC_HIGHLIGHTS"
    CREATE_PRESS_VIDEO = "CREATE_PRESS_VIDEO"
    UPDATE_PRESS_VIDEO = "UPDATE_PRESS_VIDEO"
    DELETE_PRESS_VIDEO = "DELETE_PRESS_VIDEO"
    REORDER_PRESS_VIDEOS = "REORDER_PRESS_VIDEOS"
    CREATE_QUOTE_CATEGORY = "CREATE_QUOTE_CATEGORY"
    UPDATE_QUOTE_CATEGORY = "UPDATE_QUOTE_CATEGORY"
    DELETE_QUOTE_CATEGORY = "DELETE_QUOTE_CATEGORY"
    CREATE_PRESS_QUOTE = "CREATE_PRESS_QUOTE"
    UPDATE_PRESS_QUOTE = "UPDATE_PRESS_QUOTE"
    DELETE_PRESS_QUOTE = "DELETE_PRESS_QUOTE"
    TOGGLE_PRESS_QUOTE = "TOGGLE_PRESS_QUOTE"
    UPDATE_PRESS_KIT_CONTACT = "UPDATE_PRESS_KIT_CONTACT"
    UPDATE_PRESS_KIT_SETTINGS = "UPDATE_PRESS_KIT_SETTINGS"

    # System
    CLEAR_LOGS = "CLEAR_LOGS"
    SYSTEM_ERROR = "SYSTEM_ERROR"

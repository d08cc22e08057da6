"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"

    # Preference Validation Errors
    UNKNOWN_FEATURE = "Unknown audio feature: {name}. Must be one of {valid}"
    NON_FINITE_WEIGHT = "Weight for {name} must be a finite number"
    UNKNOWN_SETTING = "Unknown discovery setting: {name}"

    # Gesture Errors
    NON_FINITE_SAMPLE = "Gesture sample field '{field}' must be finite"
    INVALID_CARD_WIDTH = "Card width must be a positive finite number"

    # Queue Errors
    LOW_WATER_MARK_TOO_HIGH = "low_water_mark must be smaller than capacity"

    # Configuration Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_BASE_URL = "API base URL must start with http:// or https://"

    # Remote service errors
    EMPTY_API_RESPONSE = "No data received from {operation}"
    HTTP_STATUS_ERROR = "{operation} failed with HTTP {status}"
    HTTP_TRANSPORT_ERROR = "{operation} failed: {error}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application lifecycle
    APP_STARTING = "Starting swipe discovery ({environment})"
    APP_STOPPED = "Swipe discovery stopped"
    APP_KEYBOARD_INTERRUPT = "Interrupted by user"
    APP_FATAL_ERROR = "Fatal error: %s"
    CONTAINER_SHUTDOWN = "Container shut down"

    # Session lifecycle
    SESSION_MOUNTED = "Discovery session mounted (queue=%d)"
    SESSION_UNMOUNTED = "Discovery session unmounted"
    SESSION_REHYDRATE_FAILED = "Could not load discovery settings, keeping defaults: %s"
    SESSION_RETRY = "Empty deck, requesting tracks again"

    # Gestures
    GESTURE_IGNORED = "Ignoring %s while card is %s"
    GESTURE_INVALID = "Discarding invalid gesture sample: %s"
    GESTURE_SPRING_BACK = "Swipe below threshold, springing back"

    # Commits / feedback
    CARD_COMMITTED = "Committed %s on track %s (rating=%.1f)"
    CARD_NO_TRACK = "Commit requested with no current track"
    HAPTIC_FAILED = "Haptic pulse failed"
    FEEDBACK_FAILED = "Feedback submission for track %s failed: %s"

    # Queue
    QUEUE_FILL_STARTED = "Requesting %d tracks (queue=%d)"
    QUEUE_FILLED = "Appended %d tracks (%d duplicates dropped), queue=%d"
    QUEUE_EMPTY_RESULT = "Discovery returned no tracks"
    QUEUE_REFILL_IN_FLIGHT = "Refill already in flight, skipping"
    QUEUE_REFILL_FAILED = "Refill failed, keeping %d queued tracks: %s"
    QUEUE_REFILL_DISCARDED = "Discarding refill result after close"
    QUEUE_ADVANCED = "Advanced past track %s (remaining=%d)"
    QUEUE_EXHAUSTED = "Queue exhausted"
    QUEUE_CLOSED = "Track queue closed"

    # Preferences
    PREFERENCES_UPDATED = "Preference vector updated: %s"
    PREFERENCES_PUSH_FAILED = "Preference push failed, keeping local vector: %s"
    SETTINGS_UPDATED = "Discovery settings updated: %s"
    SETTINGS_PUSH_FAILED = "Settings push failed, keeping local settings: %s"
    PREFERENCES_REHYDRATED = "Rehydrated preferences (%d feedback events on record)"

    # Background tasks
    TASK_FAILED = "Background task %s failed"
    TASKS_CANCELLED = "Cancelled %d background tasks"

    # HTTP client
    HTTP_CLIENT_INITIALIZED = "Discovery API client initialized (base_url=%s, timeout=%.1fs)"
    HTTP_REQUEST = "%s %s"
    HTTP_REQUEST_FAILED = "%s %s failed: %s"

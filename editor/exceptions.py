# file: editor/exceptions.py
"""
Defines the custom exception hierarchy for the editor.
"""

class SceneEditorError(Exception):
    """Base exception for all editor-specific errors."""
    pass

# --- Configuration Errors ---
class ConfigurationError(SceneEditorError):
    """Error related to loading, saving, or validating configuration."""
    pass

# --- Service Errors ---
class ServiceResolutionError(SceneEditorError, KeyError):
    """Raised when a service (or one of its dependencies) cannot be resolved."""
    pass

# --- Command Errors ---
class CommandError(SceneEditorError):
    """Base error for problems building a command."""
    pass

class PropertyPathError(CommandError):
    """The property path handed to a command cannot address a value."""
    pass

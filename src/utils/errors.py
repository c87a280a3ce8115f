"""
Error types raised while building the stage and audience

All of these surface once, at startup/load time. Nothing in the tick loop
raises them.
"""


class ConfigError(ValueError):
    """Invalid configuration (negative timing, malformed catalog entry, unreadable file)"""


class MissingCollaboratorError(ConfigError):
    """A required collaborator (loudness source, audio/animation/lighting sink) is missing"""

    def __init__(self, owner: str, collaborator: str):
        self.owner = owner
        self.collaborator = collaborator
        super().__init__(f"{owner} requires a {collaborator}, got None")

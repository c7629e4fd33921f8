"""
Errors
======
Typed failures raised by the demos.

  ConfigurationError    fatal for the demo that needs the settings
  ToolExecutionError    converted to a string at the tool boundary
  UnknownToolError      the model asked for a tool that was never registered
  SecurityBlockedError  raised by SecurityMiddleware before the agent runs

Only ConfigurationError ends a demo. The chat loop reports the others and
keeps the session alive.
"""


class AgentDemoError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(AgentDemoError):
    """
    Raised when a settings section is missing required values.

    Attributes:
        section — the settings section that failed validation
        missing — names of every missing field, in declaration order
    """

    def __init__(self, section: str, missing: list[str]):
        self.section = section
        self.missing = list(missing)
        super().__init__(
            f"Missing {section} configuration: {', '.join(self.missing)}. "
            "Please check your appsettings.json file."
        )


class ToolExecutionError(AgentDemoError):
    def __init__(self, tool: str, reason: str):
        self.tool = tool
        self.reason = reason
        super().__init__(f"Error executing {tool}: {reason}")


class UnknownToolError(AgentDemoError):
    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Unknown tool: {tool}")


class SecurityBlockedError(AgentDemoError):
    """Raised when the latest user message contains a blocked keyword."""

    def __init__(self, keyword: str):
        self.keyword = keyword
        super().__init__(f"Request blocked due to sensitive content: {keyword}")

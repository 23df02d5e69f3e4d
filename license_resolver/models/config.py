"""Configuration Pydantic models for license-resolver."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from license_resolver.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    MAX_CONCURRENT_REQUESTS,
)


class ResolverOptions(BaseModel):
    """Options passed through every resolver call.

    Built once per run and never mutated.
    """

    model_config = {"extra": "forbid", "frozen": True}

    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="Network timeout in seconds"
    )
    follow_redirects: bool = Field(
        default=True,
        description="Whether the final-URL strategies may follow redirects",
    )
    github_token: Optional[str] = Field(
        default=None,
        description="Bearer credential for GitHub API calls",
        repr=False,
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent header for HTTP calls"
    )


class ResolverConfig(BaseModel):
    """Configuration file contents for license-resolver.

    All fields have defaults to allow partial configuration.
    """

    model_config = {"extra": "forbid"}

    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Network timeout in seconds for every HTTP request.",
    )
    follow_redirects: bool = Field(
        default=True,
        description="Follow redirects to find the final license URL.",
    )
    github_token: Optional[str] = Field(
        default=None,
        description="GitHub token used for API lookups.",
        repr=False,
    )
    user_agent: Optional[str] = Field(
        default=None,
        description="Override for the User-Agent header.",
    )
    max_concurrent_requests: int = Field(
        default=MAX_CONCURRENT_REQUESTS,
        ge=1,
        description="Maximum number of dependencies resolved at once.",
    )

    def to_options(
        self,
        github_token: Optional[str] = None,
        timeout: Optional[float] = None,
        follow_redirects: Optional[bool] = None,
    ) -> ResolverOptions:
        """Build run options, letting explicit arguments win over the file.

        Args:
            github_token: Token from the command line or environment.
            timeout: Timeout from the command line.
            follow_redirects: Redirect policy from the command line.

        Returns:
            Frozen ResolverOptions for the run.
        """
        return ResolverOptions(
            timeout=timeout if timeout is not None else self.timeout,
            follow_redirects=(
                follow_redirects
                if follow_redirects is not None
                else self.follow_redirects
            ),
            github_token=github_token or self.github_token,
            user_agent=self.user_agent or DEFAULT_USER_AGENT,
        )

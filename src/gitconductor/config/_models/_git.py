"""Git invocation configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class GitConfig(BaseModel):
    """Git invocation configuration section.

    Attributes:
        executable: Name or path of the git binary.
        no_editor_command: Command substituted for every editor so that no
            git step ever waits for an interactive editor.
        rename_similarity: Similarity threshold (percent) used when detecting
            renames between HEAD and the incoming side of a conflict.
        reword_map_filename: File name of the pending reword map, stored in
            the repository's git directory during an interactive rebase.
        fetch_workers: Worker threads available for background fetches.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    executable: str = "git"
    no_editor_command: str = "true"
    rename_similarity: int = Field(default=50, ge=1, le=100)
    reword_map_filename: str = "gitconductor-reword-map.json"
    fetch_workers: int = Field(default=2, ge=1)

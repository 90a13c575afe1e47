"""Process-level configuration for a conversion run.

A ConverterConfig can be built in code, loaded from YAML, or assembled by the
entry scripts from command-line flags.  Both snake_case field names and the
camelCase option names (inputPath, outputPath, dpi, canvasWidthIn,
canvasHeightIn, ...) are accepted.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from src.utils.file_utils import load_yaml


DEFAULT_DPI = 96
CANVAS_WIDTH_IN = 13.33
CANVAS_HEIGHT_IN = 7.5
VIEWPORT_WIDTH_PX = 1280
VIEWPORT_HEIGHT_PX = 720
CONTAINER_SELECTOR = ".ppt-page-wrapper"


class ConverterConfig(BaseModel):
    """Tunables for one document-to-deck run."""

    model_config = ConfigDict(populate_by_name=True)

    input_path: str | Path = Field(
        alias="inputPath",
        description="Source XML or HTML document, or an http(s) page URL (kept as a string)",
    )
    output_path: Optional[Path] = Field(
        default=None,
        alias="outputPath",
        description="Target .pptx path. None = derive from the input (XML) or a timestamp (DOM)",
    )
    dpi: float = Field(default=DEFAULT_DPI, gt=0, description="Pixels per inch for declared pixel geometry")
    canvas_width_in: float = Field(default=CANVAS_WIDTH_IN, gt=0, alias="canvasWidthIn")
    canvas_height_in: float = Field(default=CANVAS_HEIGHT_IN, gt=0, alias="canvasHeightIn")

    # --- rendered-page tunables ---
    container_selector: str = Field(default=CONTAINER_SELECTOR, alias="containerSelector")
    viewport_width: int = Field(default=VIEWPORT_WIDTH_PX, gt=0, alias="viewportWidth")
    viewport_height: int = Field(default=VIEWPORT_HEIGHT_PX, gt=0, alias="viewportHeight")
    navigation_timeout_ms: int = Field(default=60000, gt=0, alias="navigationTimeoutMs")
    settle_ms: int = Field(
        default=1000,
        ge=0,
        alias="settleMs",
        description="Extra wait after navigation so injected styles apply",
    )
    dom_mode: Literal["hybrid", "structural"] = Field(
        default="hybrid",
        alias="domMode",
        description="'hybrid' = screenshot background + transparent text overlay; "
                    "'structural' = rebuild shapes and visible text from computed styles",
    )
    temp_dir: Optional[Path] = Field(
        default=None,
        alias="tempDir",
        description="Directory for slide screenshots. None = a fresh temp directory per run",
    )
    keep_temp_files: bool = Field(default=False, alias="keepTempFiles")

    font_fallbacks: dict[str, str] = Field(
        default_factory=dict,
        alias="fontFallbacks",
        description="Extra source-family -> output-family entries merged over the defaults",
    )

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides) -> "ConverterConfig":
        """Load a config from a YAML file.

        Keyword overrides use snake_case field names and win over the file;
        None values are ignored so unset CLI flags do not clobber the file.
        """
        data = load_yaml(path)
        alias_map = {f.alias: name for name, f in cls.model_fields.items() if f.alias}
        data = {alias_map.get(k, k): v for k, v in data.items()}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(data)

    def to_yaml(self, path: str | Path) -> None:
        """Save the config to a YAML file (camelCase keys)."""
        path = Path(path)
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

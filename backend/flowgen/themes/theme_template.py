"""
Theme presets for generated flowcharts.

A ThemeConfig is turned into plain-language styling instructions
(generate_theme_prompt) which are fed either to Stage 1 as
theme_instructions or to the apply-theme prompt.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Orientation = Literal[
    "vertical",
    "horizontal",
    "pipeline",
    "radial",
    "circular",
    "swimlane",
    "grid",
    "hierarchical",
    "layered",
]


class ThemeConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    font_name: Optional[str] = Field(default=None, alias="fontName")
    text_color: Optional[str] = Field(default=None, alias="textColor")
    text_size: Optional[int] = Field(default=None, alias="textSize")
    arrow_color: Optional[str] = Field(default=None, alias="arrowColor")
    box_color: Optional[str] = Field(default=None, alias="boxContainerColor")
    border_color: Optional[str] = Field(default=None, alias="containerBoxBorderColor")
    use_suitable_shapes: Optional[bool] = Field(default=None, alias="useSuitableShapes")
    max_height: Optional[int] = Field(default=None, alias="maxHeight")   # levels deep
    max_width: Optional[int] = Field(default=None, alias="maxWidth")     # parallel branches
    orientation: Optional[Orientation] = None
    extra_instructions: Optional[str] = Field(default=None, alias="userAdditionalCustomPrompt")

    def merged(self) -> "ThemeConfig":
        """This config with unset fields taken from DEFAULT_THEME."""
        values = DEFAULT_THEME.model_dump()
        values.update(self.model_dump(exclude_none=True))
        return ThemeConfig(**values)


DEFAULT_THEME = ThemeConfig(
    font_name="Arial",
    text_color="#000000",
    text_size=14,
    arrow_color="#333333",
    box_color="#FFFFFF",
    border_color="#000000",
    use_suitable_shapes=False,
    max_height=5,
    max_width=4,
    orientation="vertical",
    extra_instructions="",
)

PRESET_THEMES: Dict[str, ThemeConfig] = {
    "default": DEFAULT_THEME,
    "modern": ThemeConfig(
        font_name="Segoe UI",
        text_color="#2C3E50",
        text_size=16,
        arrow_color="#3498DB",
        box_color="#ECF0F1",
        border_color="#3498DB",
        use_suitable_shapes=True,
        max_height=5,
        max_width=4,
        orientation="swimlane",
    ),
    "minimal": ThemeConfig(
        font_name="Helvetica",
        text_color="#000000",
        text_size=14,
        arrow_color="#666666",
        box_color="#FFFFFF",
        border_color="#CCCCCC",
        use_suitable_shapes=False,
        max_height=4,
        max_width=3,
        orientation="horizontal",
    ),
    "professional": ThemeConfig(
        font_name="Roboto",
        text_color="#1A1A1A",
        text_size=15,
        arrow_color="#34495E",
        box_color="#F8F9FA",
        border_color="#34495E",
        use_suitable_shapes=True,
        max_height=5,
        max_width=4,
        orientation="layered",
    ),
    "gradient-dark": ThemeConfig(
        font_name="Georgia",
        text_color="#FFFFFF",
        text_size=14,
        arrow_color="#000000",
        box_color="#2D3748",
        border_color="#1A202C",
        use_suitable_shapes=False,
        max_height=5,
        max_width=4,
        orientation="vertical",
        extra_instructions=(
            "Use dark gradient backgrounds for nodes (#2D3748 to #1A202C). "
            "Keep arrows black and thin. Use rounded rectangles for all nodes."
        ),
    ),
}

# orientation -> (Mermaid direction, label, best used for, layout hint)
ORIENTATIONS = {
    "vertical": ("TD", "Vertical (Top-Down)", "Linear processes, decision trees",
                 "Flow from top to bottom."),
    "horizontal": ("LR", "Horizontal (Left-Right)", "Timelines, pipelines",
                   "Flow from left to right."),
    "pipeline": ("LR", "Pipeline (Conveyor)", "Data pipelines, agent chains",
                 "Arrange stages in one straight left-to-right line with clear inputs and outputs."),
    "radial": ("TD", "Radial (Hub-Spoke)", "Central controller, dispatcher",
               "Put one emphasized hub node in the middle with every module branching from it."),
    "circular": ("TD", "Circular (Loop)", "Iterative processes, feedback",
                 "Show the feedback loop explicitly with an edge back to an earlier step."),
    "swimlane": ("TD", "Swimlane (Multi-Lane)", "Multi-agent, parallel workflows",
                 "Group steps by role or module and show the hand-offs between groups."),
    "grid": ("TD", "Grid (Matrix)", "Cross-functional, dependencies",
             "Lay nodes out in rows and columns with links along both axes."),
    "hierarchical": ("TD", "Hierarchical (Tree)", "Decision trees, classifications",
                     "Build a tree: parents above children, no cross links between branches."),
    "layered": ("TD", "Layered (Stacked)", "Architecture, abstraction layers",
                "Stack abstraction layers (UI, logic, data) and connect them top to bottom."),
}

ORIENTATION_OPTIONS = [
    {"value": key, "label": label, "description": description}
    for key, (_, label, description, _) in ORIENTATIONS.items()
]


def orientation_direction(orientation: Optional[str]) -> str:
    """Mermaid direction keyword for an orientation (unknown -> TD)."""
    if orientation not in ORIENTATIONS:
        return "TD"
    return ORIENTATIONS[orientation][0]


def get_preset(name: Optional[str]) -> Optional[ThemeConfig]:
    if not name:
        return None
    return PRESET_THEMES.get(name)


def generate_theme_prompt(config: Optional[ThemeConfig] = None) -> str:
    c = (config or ThemeConfig()).merged()
    direction, label, _, hint = ORIENTATIONS[c.orientation]

    sections = [
        "VISUAL STYLING REQUIREMENTS:",
        "",
        "1. FONT:",
        f"   - Font family: {c.font_name}",
        f"   - Text color: {c.text_color}",
        f"   - Font size: {c.text_size}px",
        "",
        "2. COLORS:",
        f"   - Node background: {c.box_color}",
        f"   - Node border: {c.border_color}",
        f"   - Arrows: {c.arrow_color}",
        "",
        "3. STRUCTURE:",
        f"   - At most {c.max_height} levels deep and {c.max_width} parallel branches",
        "   - Aim for 6-12 nodes per diagram; split large content into several diagrams",
        "",
        f"4. ORIENTATION - {label}:",
        f"   - Direction: {direction}",
        f"   - {hint}",
        "",
    ]

    if c.use_suitable_shapes:
        sections += [
            "5. NODE SHAPES - pick the shape from the node's role:",
            "   - start / end: stadium",
            "   - process / action: rect",
            "   - decision: diamond",
            "   - input / output: parallelogram",
            "   - subprocess: subroutine",
            "   - database / storage: cylinder",
            "   - connector: circle",
        ]
    else:
        sections += [
            "5. NODE SHAPES:",
            "   - Use plain rectangles (rect) for every node",
        ]

    sections += [
        "",
        "6. MERMAID STYLING:",
        f"   %%{{init: {{'theme':'base', 'themeVariables': {{ 'primaryColor':'{c.box_color}', "
        f"'primaryTextColor':'{c.text_color}', 'primaryBorderColor':'{c.border_color}', "
        f"'lineColor':'{c.arrow_color}', 'fontSize':'{c.text_size}px', 'fontFamily':'{c.font_name}'}}}}}}%%",
        f"   classDef defaultStyle fill:{c.box_color},stroke:{c.border_color},stroke-width:2px,color:{c.text_color}",
    ]

    if c.extra_instructions and c.extra_instructions.strip():
        sections += [
            "",
            "7. ADDITIONAL INSTRUCTIONS:",
            c.extra_instructions.strip(),
        ]

    return "\n".join(sections).strip()


def generate_sample_themed_code(config: Optional[ThemeConfig] = None) -> str:
    """Two-node reference diagram with the theme applied."""
    c = (config or ThemeConfig()).merged()
    node_style = f"fill:{c.box_color},stroke:{c.border_color},stroke-width:2px,color:{c.text_color}"
    return "\n".join([
        f"%%{{init: {{'theme':'base', 'themeVariables': {{ 'primaryColor':'{c.box_color}', "
        f"'primaryTextColor':'{c.text_color}', 'primaryBorderColor':'{c.border_color}', "
        f"'lineColor':'{c.arrow_color}', 'fontSize':'{c.text_size}px', 'fontFamily':'{c.font_name}'}}}}}}%%",
        f"flowchart {orientation_direction(c.orientation)}",
        '    A["Sample Node 1"] --> B["Sample Node 2"]',
        f"    style A {node_style}",
        f"    style B {node_style}",
        f"    linkStyle default stroke:{c.arrow_color},stroke-width:2px",
    ])


def validate_theme_config(config: ThemeConfig) -> List[str]:
    warnings = []

    if config.text_size is not None and not 8 <= config.text_size <= 32:
        warnings.append("Text size should be between 8px and 32px for optimal readability")

    if config.max_height is not None and config.max_height < 2:
        warnings.append("Maximum height should be at least 2 levels for meaningful flowcharts")
    if config.max_height is not None and config.max_height > 10:
        warnings.append("Maximum height above 10 levels may result in overly complex diagrams")

    if config.max_width is not None and config.max_width < 2:
        warnings.append("Maximum width should be at least 2 branches for meaningful flowcharts")
    if config.max_width is not None and config.max_width > 8:
        warnings.append("Maximum width above 8 branches may result in cluttered diagrams")

    if config.text_color and config.box_color:
        if config.text_color.lower() == config.box_color.lower():
            warnings.append("Text color and background color are the same - text will be invisible")

    return warnings

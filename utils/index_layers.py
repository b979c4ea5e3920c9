"""
Third Place Index Map — Index Layer Variants
One enumeration for the four index layers; metric field, ranking key,
color scale and title all come from config.INDEX_LAYERS.
"""
from enum import Enum

import branca.colormap as cm

import config


class IndexLayer(Enum):
    OVERALL = "overall-index"
    TRADITIONAL = "traditional-score"
    COMMUNITY = "community-score"
    MODERN = "modern-score"

    @classmethod
    def from_id(cls, layer_id: str | None) -> "IndexLayer":
        """Resolve a layer id, falling back to the overall index."""
        try:
            return cls(layer_id)
        except ValueError:
            return cls(config.DEFAULT_LAYER)

    @property
    def metric(self) -> str:
        """Tract property holding this layer's index value."""
        return config.INDEX_LAYERS[self.value]["metric"]

    @property
    def key(self) -> str:
        """Short name used in rankings and distributions."""
        return config.INDEX_LAYERS[self.value]["key"]

    @property
    def title(self) -> str:
        return config.INDEX_LAYERS[self.value]["title"]

    @property
    def colors(self) -> list[str]:
        return config.INDEX_LAYERS[self.value]["colors"]

    @property
    def colormap(self) -> cm.StepColormap:
        """Five-step colormap with breaks at config.INDEX_BREAKS."""
        return cm.StepColormap(
            colors=self.colors,
            index=config.INDEX_BREAKS + [1.0],
            vmin=0.0,
            vmax=1.0,
            caption=self.title,
        )

    def color_for(self, value) -> str:
        """Hex color for an index value; missing values take the lowest step."""
        if value is None or value != value:
            return self.colors[0]
        return self.colormap.rgb_hex_str(float(value))

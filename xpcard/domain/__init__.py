from .card_request import CardRequest, AssetLoadError, OptionalAssetMissing
__all__ = [
    "CardRequest",
    "AssetLoadError",
    "OptionalAssetMissing"
]

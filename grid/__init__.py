"""Qt-free grid mapping core: preset model, scaling, nearest-cell search, handle sync."""

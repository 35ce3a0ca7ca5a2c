from chartgeom.adapters.normalize import normalize_bar_datasets, normalize_fractions, normalize_points

__all__ = ["normalize_bar_datasets", "normalize_fractions", "normalize_points"]

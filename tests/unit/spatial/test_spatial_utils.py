"""Unit tests for spatial utilities."""

import geopandas as gpd
import pytest
from shapely.geometry import Point

from conflict_engine.spatial import ensure_crs


def test_ensure_crs_no_transformation_when_already_wgs84():
    """Test that no transformation occurs when GDF is already in WGS84."""
    # Arrange
    gdf = gpd.GeoDataFrame({"id": [1]}, geometry=[Point(14.4378, 50.0755)], crs="EPSG:4326")

    # Act
    result = ensure_crs(gdf)

    # Assert: Should return the original object (no copy/transform)
    assert result is gdf


def test_ensure_crs_transforms_projected_input():
    """Test that S-JTSK (EPSG:5514) input is transformed to longitude/latitude."""
    # Arrange: Prague city centre in S-JTSK / Krovak East North
    gdf = gpd.GeoDataFrame({"id": [1]}, geometry=[Point(-743000, -1043000)], crs="EPSG:5514")

    # Act
    result = ensure_crs(gdf)

    # Assert
    assert result.crs == "EPSG:4326"
    assert result is not gdf
    assert 14.0 < result.geometry.iloc[0].x < 15.0
    assert 49.5 < result.geometry.iloc[0].y < 50.5


def test_ensure_crs_raises_error_when_no_crs():
    """Test that error is raised when input has no CRS."""
    gdf = gpd.GeoDataFrame({"id": [1]}, geometry=[Point(14.4378, 50.0755)])

    with pytest.raises(ValueError, match="no CRS defined"):
        ensure_crs(gdf)

# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Azure regions, by display name.
"""

from arm_composex.common.logging import LOG

EAST_ASIA = "eastasia"
SOUTHEAST_ASIA = "southeastasia"
CENTRAL_US = "centralus"
EAST_US = "eastus"
EAST_US_2 = "eastus2"
WEST_US = "westus"
NORTH_CENTRAL_US = "northcentralus"
SOUTH_CENTRAL_US = "southcentralus"
NORTH_EUROPE = "northeurope"
WEST_EUROPE = "westeurope"
JAPAN_WEST = "japanwest"
JAPAN_EAST = "japaneast"
BRAZIL_SOUTH = "brazilsouth"
AUSTRALIA_EAST = "australiaeast"
AUSTRALIA_SOUTHEAST = "australiasoutheast"
SOUTH_INDIA = "southindia"
CENTRAL_INDIA = "centralindia"
WEST_INDIA = "westindia"

LOCATIONS = {
    "East Asia": EAST_ASIA,
    "Southeast Asia": SOUTHEAST_ASIA,
    "Central US": CENTRAL_US,
    "East US": EAST_US,
    "East US 2": EAST_US_2,
    "West US": WEST_US,
    "North Central US": NORTH_CENTRAL_US,
    "South Central US": SOUTH_CENTRAL_US,
    "North Europe": NORTH_EUROPE,
    "West Europe": WEST_EUROPE,
    "Japan West": JAPAN_WEST,
    "Japan East": JAPAN_EAST,
    "Brazil South": BRAZIL_SOUTH,
    "Australia East": AUSTRALIA_EAST,
    "Australia Southeast": AUSTRALIA_SOUTHEAST,
    "South India": SOUTH_INDIA,
    "Central India": CENTRAL_INDIA,
    "West India": WEST_INDIA,
}

DEFAULT_LOCATION = WEST_EUROPE


def define_location(location: str = None) -> str:
    """
    Returns the region name to use in the template, from either a display name or a region name.
    Unknown regions are kept as-is, the deployment engine being the judge of these.

    :param str location:
    :rtype: str
    """
    if not location:
        return DEFAULT_LOCATION
    if not isinstance(location, str):
        raise TypeError("location must be of type", str, "Got", type(location))
    if location in LOCATIONS:
        return LOCATIONS[location]
    if location not in LOCATIONS.values():
        LOG.warning(f"Location {location} is not a known region. Using it as-is.")
    return location

# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

MOD_KEY = "network"

NETWORK_API_VERSION = "2020-04-01"
VNET_TYPE = "Microsoft.Network/virtualNetworks"
SUBNET_TYPE = "Microsoft.Network/virtualNetworks/subnets"
NETWORK_PROFILE_TYPE = "Microsoft.Network/networkProfiles"

CONTAINER_GROUPS_DELEGATION = "Microsoft.ContainerInstance/containerGroups"
SERVER_FARMS_DELEGATION = "Microsoft.Web/serverFarms"

INTERFACE_NAME = "eth0"
IP_CONFIGURATION_NAME = "ipconfigprofile"

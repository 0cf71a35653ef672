# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Azure SQL servers, with one database, transparent data encryption and firewall rules.
"""

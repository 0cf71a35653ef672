# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Cosmos DB accounts, with one SQL API database and its containers.
"""

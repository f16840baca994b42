# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
API Route Modules

FastAPI routers for the pub v2 repository protocol:
- packages: Upload URL, package metadata, archive download
- upload: Archive upload and finalize
"""

# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Response classes for the pub v2 API"""

from fastapi.responses import JSONResponse

PUB_CONTENT_TYPE = "application/vnd.pub.v2+json"


class PubJSONResponse(JSONResponse):
    """JSON response with the pub v2 media type"""
    media_type = PUB_CONTENT_TYPE

from rest_framework import status as http_status
from rest_framework.response import Response


def ok_response(data=None, message="", status=http_status.HTTP_200_OK):
    return Response({"status": "ok", "data": data, "message": message}, status=status)

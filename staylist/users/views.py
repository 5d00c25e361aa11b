from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .identity import lookup_identities
from .serializers import PublicUserSerializer


@extend_schema(
    summary="Current user",
    description="Identity of the authenticated caller as known to the identity provider.",
    responses={
        200: PublicUserSerializer,
        401: OpenApiResponse(description="Authentication required"),
    },
    tags=["auth"],
)
class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        user_id = str(request.user.id)
        identity = lookup_identities([user_id]).get(user_id)
        if identity is None:
            # Not synced yet: the id is all we know
            payload = {"id": user_id, "display_name": "", "avatar_url": None}
        else:
            payload = identity.as_dict()
        return Response(PublicUserSerializer(payload).data)

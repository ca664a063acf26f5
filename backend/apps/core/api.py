"""REST API endpoints for viewer identity and authentication."""

from __future__ import annotations

from django.urls import path
from rest_framework import serializers as drf_serializers
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.services import (
    Anonymous,
    DjangoAuthProvider,
    Identity,
    SessionIdentityStore,
    resolve_request_identity,
)
from apps.evaluations.services import migrate_after_authentication

app_name = "core"


class CredentialsSerializer(drf_serializers.Serializer):
    email = drf_serializers.CharField()
    password = drf_serializers.CharField(trim_whitespace=False)


def _identity_payload(identity: Identity) -> dict[str, str]:
    if isinstance(identity, Anonymous):
        return {"type": "guest", "id": str(identity.guest_id)}
    return {"type": "user", "id": str(identity.user_id)}


class MeView(APIView):
    def get(self, request, *args, **kwargs):
        return Response(_identity_payload(resolve_request_identity(request)))


class _AuthenticateView(APIView):
    """Shared flow: authenticate, then fold the preceding guest session into the account."""

    success_status = status.HTTP_200_OK

    def authenticate_credentials(self, provider: DjangoAuthProvider, email: str, password: str):
        raise NotImplementedError

    def post(self, request, *args, **kwargs):
        serializer = CredentialsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        provider = DjangoAuthProvider(request)
        result = self.authenticate_credentials(
            provider,
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        if not result.ok:
            return Response({"detail": result.error}, status=status.HTTP_400_BAD_REQUEST)

        # login() cycles the session key but keeps its data, so the guest id is still there.
        migration = migrate_after_authentication(
            identity_store=SessionIdentityStore(request.session),
            user_id=result.identity.user_id,
        )

        return Response(
            {
                "identity": _identity_payload(result.identity),
                "migration": migration.as_dict() if migration is not None else None,
            },
            status=self.success_status,
        )


class SignUpView(_AuthenticateView):
    success_status = status.HTTP_201_CREATED

    def authenticate_credentials(self, provider, email, password):
        return provider.sign_up(email, password)


class SignInView(_AuthenticateView):
    def authenticate_credentials(self, provider, email, password):
        return provider.sign_in(email, password)


class SignOutView(APIView):
    def post(self, request, *args, **kwargs):
        DjangoAuthProvider(request).sign_out()
        # Next anonymous visit starts a fresh guest.
        SessionIdentityStore(request.session).clear()
        return Response(status=status.HTTP_204_NO_CONTENT)


urlpatterns = [
    path("me/", MeView.as_view(), name="me"),
    path("signup/", SignUpView.as_view(), name="signup"),
    path("signin/", SignInView.as_view(), name="signin"),
    path("signout/", SignOutView.as_view(), name="signout"),
]

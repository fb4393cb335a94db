from django.urls import path

from .views import (
    AuthStatusView,
    ChangePasswordView,
    ForgotPasswordView,
    ProfileView,
    RefreshView,
    RequestResetCodeView,
    ResetPasswordView,
    ResetPasswordWithCodeView,
    SigninView,
    SignoutView,
    SignupView,
    VerifyResetCodeView,
)

app_name = "accounts"


urlpatterns = [
    path("signup/", SignupView.as_view(), name="signup"),
    path("signin/", SigninView.as_view(), name="signin"),
    path("refresh/", RefreshView.as_view(), name="refresh"),
    path("signout/", SignoutView.as_view(), name="signout"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("change-password/", ChangePasswordView.as_view(), name="change-password"),
    path("status/", AuthStatusView.as_view(), name="status"),
    path("forgot-password/", ForgotPasswordView.as_view(), name="forgot-password"),
    path("reset-password/", ResetPasswordView.as_view(), name="reset-password"),
    path("request-reset-code/", RequestResetCodeView.as_view(), name="request-reset-code"),
    path("verify-reset-code/", VerifyResetCodeView.as_view(), name="verify-reset-code"),
    path("reset-password-with-code/", ResetPasswordWithCodeView.as_view(), name="reset-password-with-code"),
]

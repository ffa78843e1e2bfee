"""Sign-in, registration, password reset and account settings views."""

from __future__ import annotations

import streamlit as st

from leasedesk.forms.account import (
    ROLES,
    ChangePasswordSchema,
    ForgotPasswordSchema,
    LoginSchema,
    RegisterSchema,
    ResetPasswordSchema,
    VerifyOTPSchema,
)
from leasedesk.state import Fulfilled, UserSlice
from leasedesk_app import auth
from leasedesk_app.components.fields import DictForm, checkbox_field, password_field, select_field, text_field
from leasedesk_app.views.common import ViewContext, navigate


def _form(key: str, schema, initial=None) -> DictForm:
    ss = st.session_state
    if key not in ss:
        ss[key] = DictForm(schema, initial)
    return ss[key]


def render_login(ctx: ViewContext) -> None:
    st.title("Sign in")
    form = _form("login-form", LoginSchema)
    text_field(form, "email", "Email")
    password_field(form, "password", "Password")

    user = ctx.state.user
    if st.button("Sign in", type="primary", disabled=user.is_loading) and form.validate():
        result = user.run(UserSlice.Action.LOGIN, ctx.client.login, form.values["email"], form.values["password"])
        if isinstance(result, Fulfilled):
            auth.set_auth(user.token, user.profile)
            form.reset()
            navigate("dashboard")
        else:
            st.error(result.message)
    if st.button("Forgot password?"):
        user.cancel_reset()
        navigate("forgot-password")
    st.caption("No account yet?")
    if st.button("Create an account"):
        navigate("register")


def render_register(ctx: ViewContext) -> None:
    st.title("Create your account")
    form = _form("register-form", RegisterSchema, {"role": "tenant"})
    first_col, last_col = st.columns(2)
    with first_col:
        text_field(form, "first_name", "First name")
    with last_col:
        text_field(form, "last_name", "Last name")
    text_field(form, "email", "Email")
    password_field(form, "password", "Password")
    password_field(form, "confirm_password", "Confirm password")
    select_field(form, "role", "Role", ROLES)
    checkbox_field(form, "conditions", "I accept the terms and conditions")

    user = ctx.state.user
    if st.button("Register", type="primary", disabled=user.is_loading) and form.validate():
        result = user.run(UserSlice.Action.REGISTER, ctx.client.register, form.values)
        if isinstance(result, Fulfilled):
            form.reset()
            st.success("Account created. You can sign in now.")
        else:
            st.error(result.message)
    if st.button("Back to sign in"):
        navigate("login")


def render_forgot_password(ctx: ViewContext) -> None:
    """Email, then the one-time code, then a new password."""
    st.title("Reset your password")
    user = ctx.state.user
    stage = user.reset_stage

    if stage == "email":
        form = _form("forgot-form", ForgotPasswordSchema)
        text_field(form, "email", "Email")
        if st.button("Send code", type="primary", disabled=user.is_loading) and form.validate():
            user.reset_email = form.values["email"].strip()
            result = user.run(UserSlice.Action.FORGOT_PASSWORD, ctx.client.forgot_password, user.reset_email)
            if isinstance(result, Fulfilled):
                form.reset()
                st.rerun()
            else:
                st.error(result.message)

    elif stage == "otp":
        st.info(f"If an account exists for {user.reset_email}, a 6-digit code is on its way.")
        if user.reset_code_hint and ctx.settings.debug:
            st.caption(f"Code: {user.reset_code_hint}")
        form = _form("otp-form", VerifyOTPSchema)
        text_field(form, "otp", "Verification code")
        if st.button("Verify", type="primary", disabled=user.is_loading) and form.validate():
            result = user.run(UserSlice.Action.VERIFY_OTP, ctx.client.verify_otp, user.reset_email, form.values["otp"].strip())
            if isinstance(result, Fulfilled):
                form.reset()
                st.rerun()
            else:
                st.error(result.message)
        if st.button("Send a new code"):
            result = user.run(UserSlice.Action.FORGOT_PASSWORD, ctx.client.forgot_password, user.reset_email)
            if isinstance(result, Fulfilled):
                st.toast("A new code is on its way")
            else:
                st.error(result.message)

    elif stage == "password":
        form = _form("reset-form", ResetPasswordSchema)
        password_field(form, "new_password", "New password")
        password_field(form, "confirm_password", "Confirm new password")
        if st.button("Reset password", type="primary", disabled=user.is_loading) and form.validate():
            result = user.run(UserSlice.Action.RESET_PASSWORD, ctx.client.reset_password, user.reset_token, form.values["new_password"])
            if isinstance(result, Fulfilled):
                form.reset()
                st.rerun()
            else:
                st.error(result.message)

    else:
        st.success("Password updated. You can sign in with your new password.")

    if st.button("Back to sign in"):
        user.cancel_reset()
        navigate("login")


def render_settings(ctx: ViewContext) -> None:
    st.title("Settings")
    user = ctx.state.user
    if user.profile is None:
        user.run(UserSlice.Action.PROFILE, ctx.client.me)
    profile = user.profile or auth.current_user() or {}

    st.subheader("Profile")
    with st.container(border=True):
        st.markdown(f"**Name:** {profile.get('first_name', '')} {profile.get('last_name', '')}")
        st.markdown(f"**Email:** {profile.get('email', '—')}")
        st.markdown(f"**Role:** {profile.get('role', '—')}")
    if user.error and user.last_action is UserSlice.Action.PROFILE:
        st.error(user.error)

    st.subheader("Change password")
    form = _form("password-form", ChangePasswordSchema)
    password_field(form, "current_password", "Current password")
    password_field(form, "new_password", "New password")
    password_field(form, "confirm_password", "Confirm new password")
    if st.button("Update password", disabled=user.is_loading) and form.validate():
        result = user.run(
            UserSlice.Action.CHANGE_PASSWORD,
            ctx.client.change_password,
            form.values["current_password"],
            form.values["new_password"],
        )
        if isinstance(result, Fulfilled):
            form.reset()
            st.success("Password updated.")
        else:
            st.error(result.message)

    st.subheader("Session")
    if st.button("Log out"):
        auth.clear_auth()
        navigate("login")

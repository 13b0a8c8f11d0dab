# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Password hashing and security
#
# The application-level user record lives in the public.profiles table
# (see app/modules/profiles/models.py); it is inserted right after sign-up
# with the same id as the auth user.

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

Sign-up metadata (full_name, role, department, year_of_study, bio) is stored
in user_metadata and copied into the profiles row.
"""

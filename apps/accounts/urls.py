from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('users/register', views.register, name='register'),
    path('users/login', views.login, name='login'),

    # User profile
    path('users/me', views.get_current_user, name='current-user'),
    path('users/password', views.update_password, name='update-password'),
    path('users', views.current_user_account, name='account'),
]

from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    path('', views.notification_list, name='list'),
    path('unread-count/', views.unread_count, name='unread_count'),
    path('<int:notification_id>/read/', views.mark_read, name='mark_read'),
    path('read-all/', views.mark_all_read, name='mark_all_read'),

    # Web Push
    path('push/subscribe/', views.push_subscribe, name='push_subscribe'),
    path('push/send/', views.push_send, name='push_send'),
]

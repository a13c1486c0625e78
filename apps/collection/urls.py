from django.urls import path
from . import views

app_name = 'collection'

urlpatterns = [
    # Collection
    path('items/', views.collection_items, name='items'),
    path('items/<int:item_id>/', views.collection_item_detail, name='item_detail'),

    # Showrooms
    path('showrooms/', views.showrooms, name='showrooms'),
    path('showrooms/<int:showroom_id>/', views.showroom_detail, name='showroom_detail'),
    path('showrooms/<int:showroom_id>/items/', views.showroom_add_item, name='showroom_add_item'),
    path(
        'showrooms/<int:showroom_id>/items/<int:collection_item_id>/',
        views.showroom_remove_item,
        name='showroom_remove_item'
    ),
    path('s/<slug:slug>/', views.showroom_public, name='showroom_public'),

    # Export
    path('export/csv/', views.export_csv, name='export_csv'),
    path('export/pdf/', views.export_pdf, name='export_pdf'),
]

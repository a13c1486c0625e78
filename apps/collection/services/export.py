"""
Collection exports: CSV for spreadsheets and a printable PDF table.
"""

import csv
import io
from typing import List

from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from apps.collection.models import CollectionItem

CSV_FILENAME = 'mi_coleccion_instrumentos.csv'
PDF_FILENAME = 'mi_coleccion_instrumentos.pdf'

CSV_HEADERS = ['Marca', 'Modelo', 'Tipo', 'Estado', 'Condición', 'Número Serie', 'Fecha Adquisición', 'Precio']
PDF_HEADERS = ['Marca', 'Modelo', 'Tipo', 'Estado', 'Condición', 'Nº Serie', 'Precio']

BOM = '\ufeff'
HEADER_COLOR = colors.HexColor('#2563eb')


def _date(value):
    return value.strftime('%d/%m/%Y') if value else ''


def _price(item: CollectionItem):
    if item.acquisition_price is None:
        return ''
    return f'{item.acquisition_price:.2f}'


def get_export_items(user_id) -> List[CollectionItem]:
    return list(
        CollectionItem.objects.filter(user_id=user_id)
        .select_related('instrument')
        .order_by('instrument__brand', 'instrument__model', 'pk')
    )


def build_csv(items: List[CollectionItem]) -> str:
    """
    CSV text with every field quoted, starting with a UTF-8 BOM so that
    spreadsheet apps detect the encoding.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(CSV_HEADERS)
    for item in items:
        instrument = item.instrument
        writer.writerow([
            instrument.brand,
            instrument.model,
            instrument.type,
            item.status,
            item.condition,
            item.serial_number,
            _date(item.acquisition_date),
            _price(item),
        ])
    return BOM + buffer.getvalue()


def build_pdf(items: List[CollectionItem]) -> bytes:
    """Single table listing of the collection, landscape A4."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
        title='Mi Colección de Instrumentos',
    )
    styles = getSampleStyleSheet()

    rows = [PDF_HEADERS]
    for item in items:
        instrument = item.instrument
        price = _price(item)
        rows.append([
            instrument.brand,
            instrument.model,
            instrument.type,
            item.get_status_display(),
            item.get_condition_display(),
            item.serial_number or '-',
            f'{price} {item.acquisition_currency}' if price else '-',
        ])

    table = Table(rows, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f3f4f6')]),
        ('GRID', (0, 0), (-1, -1), 0.25, colors.HexColor('#d1d5db')),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]))

    story = [
        Paragraph('Mi Colección de Instrumentos', styles['Title']),
        Paragraph(f'Generado el: {timezone.localdate().strftime("%d/%m/%Y")}', styles['Normal']),
        Spacer(1, 6 * mm),
        table,
    ]
    doc.build(story)
    return buffer.getvalue()

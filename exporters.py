import io
import logging
from datetime import date
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from models import GeneratedName

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    'Name',
    'Meaning',
    'Origin',
    'Gender',
    'Pronunciation',
    'Popularity',
    'Parent Connection',
    'Derivation',
    'Numerology',
    'Astrology',
    'Sibling Match',
]

CLIPBOARD_SEPARATOR = '\n\n---\n\n'


def _quote(value: Optional[str]) -> str:
    return '"' + (value or '').replace('"', '""') + '"'


def _sibling_match_label(value: Optional[bool]) -> str:
    if value is None:
        return ''
    return 'Yes' if value else 'No'


def names_to_csv(names: Sequence[GeneratedName]) -> str:
    """Header line plus one row per name; text fields quoted, numbers bare."""
    rows = [','.join(CSV_HEADERS)]
    for name in names:
        rows.append(','.join([
            _quote(name.name),
            _quote(name.meaning),
            _quote(name.origin),
            _quote(name.gender),
            _quote(name.pronunciation),
            str(name.popularity),
            _quote(name.parent_connection),
            _quote(name.derivation),
            '' if name.numerology is None else str(name.numerology),
            _quote(name.astrology),
            _sibling_match_label(name.sibling_match),
        ]))
    return '\n'.join(rows)


def csv_file_name(file_name: Optional[str] = None, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{file_name or 'baby-names'}-{today.isoformat()}.csv"


def names_to_clipboard_text(names: Sequence[GeneratedName]) -> str:
    entries = []
    for name in names:
        text = f"{name.name} - {name.meaning}"
        text += f"\nOrigin: {name.origin} | Gender: {name.gender}"
        text += f"\nPronunciation: {name.pronunciation}"
        if name.parent_connection:
            text += f"\nParent Connection: {name.parent_connection}"
        if name.derivation:
            text += f"\nDerivation: {name.derivation}"
        entries.append(text)
    return CLIPBOARD_SEPARATOR.join(entries)


# Function to add page numbers to the canvas
def _header_footer(canvas_obj, doc):
    canvas_obj.saveState()
    canvas_obj.setFont('Helvetica', 9)
    canvas_obj.drawString(doc.rightMargin, 0.75 * inch, f"Page {doc.page}")
    canvas_obj.restoreState()


def _detail_lines(name: GeneratedName) -> List[str]:
    lines = [
        f"<b>Meaning:</b> {escape(name.meaning)}",
        f"<b>Origin:</b> {escape(name.origin)} | <b>Gender:</b> {escape(name.gender)} | <b>Popularity:</b> {name.popularity}",
        f"<b>Pronunciation:</b> {escape(name.pronunciation)}",
    ]
    if name.parent_connection:
        lines.append(f"<b>Parent Connection:</b> {escape(name.parent_connection)}")
    if name.derivation:
        lines.append(f"<b>Derivation:</b> {escape(name.derivation)}")

    extras = []
    if name.numerology is not None:
        extras.append(f"<b>Numerology:</b> {name.numerology}")
    if name.astrology:
        extras.append(f"<b>Astrology:</b> {escape(name.astrology)}")
    if name.sibling_match is not None:
        extras.append(f"<b>Sibling Match:</b> {_sibling_match_label(name.sibling_match)}")
    if extras:
        lines.append(" | ".join(extras))
    return lines


# --- PDF Generation Function ---
def create_names_pdf(names: Sequence[GeneratedName], title: str = "Your Baby Name Shortlist") -> bytes:
    """Renders the shortlist as a PDF using ReportLab."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter,
                            rightMargin=inch, leftMargin=inch,
                            topMargin=inch, bottomMargin=inch)
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name='TitleStyle', fontSize=24, leading=28, alignment=TA_CENTER, spaceAfter=20, fontName='Helvetica-Bold'))
    styles.add(ParagraphStyle(name='NameHeadingStyle', fontSize=14, leading=18, spaceBefore=15, spaceAfter=6, fontName='Helvetica-Bold',
                              textColor=HexColor('#6A1B9A')))
    styles.add(ParagraphStyle(name='NormalBodyText', fontSize=10, leading=14, spaceAfter=4, fontName='Helvetica', alignment=TA_JUSTIFY))
    styles.add(ParagraphStyle(name='ItalicBodyText', fontSize=10, leading=14, spaceAfter=6, fontName='Helvetica-Oblique', alignment=TA_CENTER))

    story = [
        Paragraph(escape(title), styles['TitleStyle']),
        Paragraph(f"{len(names)} names, generated {date.today().isoformat()}", styles['ItalicBodyText']),
        Spacer(1, 0.3 * inch),
    ]
    for index, name in enumerate(names, start=1):
        story.append(Paragraph(f"{index}. {escape(name.name)}", styles['NameHeadingStyle']))
        for line in _detail_lines(name):
            story.append(Paragraph(line, styles['NormalBodyText']))

    doc.build(story, onFirstPage=_header_footer, onLaterPages=_header_footer)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    logger.info(f"Generated PDF shortlist with {len(names)} names ({len(pdf_bytes)} bytes).")
    return pdf_bytes

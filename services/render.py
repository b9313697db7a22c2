import enum
import html
import re
from typing import Optional, Union
from urllib.parse import quote

from model.page import AircraftPage, NationPage

_NEWLINE = re.compile(r"\r?\n")

NATIONS = [
    ("USA", "/pages/usa"),
    ("UK", "#"),
    ("France", "#"),
    ("Russia/USSR", "#"),
    ("Germany", "#"),
    ("Japan", "#"),
    ("Special", "#"),
    ("Events", "#"),
]


class RenderMode(str, enum.Enum):
    VIEW = "view"
    EDIT = "edit"


def _escape(text: str) -> str:
    return html.escape(text or "", quote=True)


def _multiline(text: str) -> str:
    """Escape free text and keep its line breaks visible"""
    return _NEWLINE.sub("<br>", _escape(text))


def _nav() -> str:
    nations = "\n".join(
        f'              <li><a href="{href}">{_escape(name)}</a></li>'
        for name, href in NATIONS
    )
    return f"""      <div class="navbar">
        <ul class="navlinks">
          <li class="nationdrop">
            <a href="#">Nations</a>
            <ul class="dropdown-nations">
{nations}
            </ul>
          </li>
          <li><a href="#">Aircrafts</a></li>
        </ul>
      </div>"""


def _document(title: str, body: str) -> str:
    title = _escape(title)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <link rel="stylesheet" href="/static/style.css">
</head>
<body>
  <header id="main-header">
    <section id="Mainpage">
      <div class="top-header">
        <h1 class="wingsofglory">{title}</h1>
      </div>
{_nav()}
    </section>
  </header>
{body}
</body>
</html>
"""


def _image(loadout_img: str, preview: bool = False) -> str:
    if not loadout_img:
        return "<p>No image uploaded</p>"
    src = _escape(loadout_img)
    if preview:
        return f'<p>Current Image: <img src="{src}" alt="Loadout Image" class="loadout-preview"></p>'
    return f'<img src="{src}" alt="Loadout Image" class="loadout-img">'


def _view_nation(page: NationPage) -> str:
    return f"""  <div class="content nation-page">
    <span class="star-accent">★</span>
    <h3 class="pageheader">About</h3>
    <p>{_multiline(page.about)}</p>

    <h3 class="pageheader">Tech Tree</h3>
    <div class="techtree-section">{page.techtree or ""}</div>

    <br><a class="backtohome" href="/">← Back to Home</a>
  </div>"""


def _view_aircraft(page: AircraftPage) -> str:
    return f"""  <div class="content aircraft-page">
    <span class="star-accent">★</span>
    <h3 class="pageheader">About</h3>
    <p>{_multiline(page.about)}</p>

    <h3 class="playstyle">Playstyle</h3>
    <p>{_multiline(page.playstyle)}</p>

    <h3 class="proscons">Pros and Cons</h3>
    <p>{_multiline(page.proscons)}</p>

    <h3 class="loadout-img">Loadout Option</h3>
    {_image(page.loadout_img)}

    <h3 class="trivia">Trivia</h3>
    <p>{_multiline(page.trivia)}</p>

    <br><a class="backtohome" href="/">← Back to Home</a>
  </div>"""


def _textarea(name: str, value: str, required: bool = True) -> str:
    flag = " required" if required else ""
    return f'<textarea name="{name}" rows="6"{flag}>{_escape(value)}</textarea><br><br>'


def _edit_form(page: Union[NationPage, AircraftPage], slug: str, fields: str) -> str:
    action = f"/edit/{_escape(quote(slug, safe=''))}"
    return f"""  <div class="content">
    <form method="post" action="{action}" enctype="multipart/form-data">
      <h3 class="form">Title</h3>
      <input type="text" name="title" value="{_escape(page.title)}" required><br><br>

      <h3 class="form">About</h3>
      {_textarea("about", page.about)}
{fields}
      <button type="submit">Update Page</button>
    </form>
    <br><a href="/">← Back to Home</a>
  </div>"""


def _edit_nation(page: NationPage, slug: str) -> str:
    fields = f"""
      <h3 class="form">Tech Tree</h3>
      {_textarea("techtree", page.techtree, required=False)}
"""
    return _edit_form(page, slug, fields)


def _edit_aircraft(page: AircraftPage, slug: str) -> str:
    fields = f"""
      <h3 class="form">Playstyle</h3>
      {_textarea("playstyle", page.playstyle)}

      <h3 class="form">Pros and Cons</h3>
      {_textarea("proscons", page.proscons)}

      <h3 class="form">Loadout Image</h3>
      <label for="loadout-img">Upload New Image (leave blank to keep existing):</label>
      <input type="file" id="loadout-img" name="loadout_img" accept="image/*"><br>
      {_image(page.loadout_img, preview=True)}<br>

      <h3 class="form">Trivia</h3>
      {_textarea("trivia", page.trivia)}
"""
    return _edit_form(page, slug, fields)


def render_page(
    page: Union[NationPage, AircraftPage],
    mode: RenderMode,
    slug: Optional[str] = None,
) -> str:
    """
    Render a stored page as a full HTML document
    Args:
        page: The stored record
        mode: VIEW for the read-only page, EDIT for the pre-filled form
        slug: Storage key the edit form posts back to, defaults to page.slug
    """
    if isinstance(page, NationPage):
        view, edit = _view_nation, _edit_nation
    elif isinstance(page, AircraftPage):
        view, edit = _view_aircraft, _edit_aircraft
    else:
        raise TypeError(f"Unsupported page type: {type(page).__name__}")

    if mode == RenderMode.VIEW:
        return _document(page.title, view(page))
    if mode == RenderMode.EDIT:
        return _document(f"Edit {page.title}", edit(page, slug or page.slug))
    raise ValueError(f"Unsupported render mode: {mode}")


def render_message(heading: str) -> str:
    """Minimal error page with a link home"""
    return f'<h1>{_escape(heading)}</h1><a href="/">Back</a>'

"""Self-contained HTML page for the map; the browser only replays colors
computed here, so the scale and the lookups stay on the Python side.

The inline script mirrors ``controller.InteractionController``: nearest-year
snapping, the tooltip lines and the no-data fallback. Text and offsets come
from the payload so both sides read the same constants; keep the two in step.
"""

from __future__ import annotations

import json

from .config import UNIT_LABEL
from .controller import NO_DATA_TEXT
from .session import Session


def build_payload(session: Session) -> dict:
    renderer, indexer = session.renderer, session.indexer
    colors, values = {}, {}
    for year in session.data.years:
        index = indexer.index_for(year)
        key = str(year)
        colors[key] = {code: renderer.target_color(code, index) for code in index}
        values[key] = {code: round(v, 4) for code, v in index.items()}
    cfg = session.config
    return {
        "years": list(session.data.years),
        "initial_year": session.selected_year,
        "colors": colors,
        "values": values,
        "no_data_color": cfg.no_data_color,
        "offset": list(cfg.tooltip_offset),
        "unit": UNIT_LABEL,
        "no_data_text": NO_DATA_TEXT,
    }


HTML = r"""
<!doctype html>
<html>
<head>
<meta charset="utf-8"/>
<style>
  html,body{margin:0; padding:0; background:#fff; font:12px/1.35 -apple-system,BlinkMacSystemFont,Segoe UI,Roboto,Helvetica,Arial,sans-serif;}
  #controls{display:flex; gap:10px; align-items:center; padding:10px 12px;}
  #year-label{font-weight:700; min-width:3em;}
  #map-container{width:__WIDTH__px;}
  path.country{transition: fill __DURATION__ms ease-in-out;}
  #tooltip{position:absolute; pointer-events:none; opacity:0; background:rgba(255,255,255,.95);
    border:1px solid #999; border-radius:6px; padding:6px 8px; box-shadow:0 1px 4px rgba(0,0,0,.2);}
</style>
</head>
<body>
<div id="controls">
  <label for="year-slider">Year</label>
  <input id="year-slider" type="range" min="__MIN__" max="__MAX__" step="1" value="__YEAR__"/>
  <span id="year-label">__YEAR__</span>
</div>
<div id="map-container">
<svg width="__WIDTH__" height="__HEIGHT__">
__COUNTRIES__
__LEGEND__
</svg>
</div>
<div id="tooltip"></div>

<script>
  const PAYLOAD = __PAYLOAD__;
  const YEARS   = PAYLOAD.years;
  const COLORS  = PAYLOAD.colors;
  const VALUES  = PAYLOAD.values;
  const NO_DATA = PAYLOAD.no_data_color;
  const [OFFX, OFFY] = PAYLOAD.offset;

  const slider  = document.getElementById('year-slider');
  const label   = document.getElementById('year-label');
  const tooltip = document.getElementById('tooltip');
  const shapes  = Array.from(document.querySelectorAll('path.country'));

  let currentYear = PAYLOAD.initial_year;

  function snap(y){
    return YEARS.reduce((best, v) => Math.abs(v - y) < Math.abs(best - y) ? v : best, YEARS[0]);
  }

  function updateMap(year){
    currentYear = snap(year);
    label.textContent = currentYear;
    const colors = COLORS[String(currentYear)] || {};
    shapes.forEach(p => { p.style.fill = colors[p.dataset.id] || NO_DATA; });
  }

  function esc(s){
    return String(s).replace(/[&<>"']/g, c => ({'&':'&amp;','<':'&lt;','>':'&gt;','"':'&quot;',"'":'&#39;'}[c]));
  }

  shapes.forEach(p => {
    p.addEventListener('mouseover', () => { tooltip.style.opacity = 1; });
    p.addEventListener('mousemove', (event) => {
      const value = (VALUES[String(currentYear)] || {})[p.dataset.id];
      const line = (value == null || isNaN(value)) ? PAYLOAD.no_data_text : `${value.toFixed(2)} ${PAYLOAD.unit}`;
      tooltip.innerHTML = `<strong>${esc(p.dataset.name || p.dataset.id)}</strong><br/>Year: ${currentYear}<br/>${line}`;
      tooltip.style.left = (event.pageX + OFFX) + 'px';
      tooltip.style.top  = (event.pageY + OFFY) + 'px';
    });
    p.addEventListener('mouseout', () => { tooltip.style.opacity = 0; });
  });

  slider.addEventListener('input', () => updateMap(+slider.value));
</script>
</body>
</html>
"""


def payload_json(session: Session) -> str:
    # "</" inside an inline script would end it early
    return json.dumps(build_payload(session)).replace("</", "<\\/")


def render_page(session: Session) -> str:
    cfg = session.config
    lo, hi = session.controller.bounds
    return (
        HTML.replace("__PAYLOAD__", payload_json(session))
        .replace("__COUNTRIES__", session.renderer.to_svg())
        .replace("__LEGEND__", session.legend.render())
        .replace("__WIDTH__", str(cfg.width))
        .replace("__HEIGHT__", str(cfg.height))
        .replace("__DURATION__", str(cfg.transition_ms))
        .replace("__MIN__", str(lo))
        .replace("__MAX__", str(hi))
        .replace("__YEAR__", session.controller.year_label)
    )

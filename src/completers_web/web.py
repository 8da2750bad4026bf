from __future__ import annotations
import argparse
import logging
from typing import Dict, List, Optional, Union

from flask import Flask, Response, jsonify, request

from completers import CompleterView, Settings
from completers.config import FETCH_TICK_LIMIT, TOP_K
from completers.sources import make_completer

log = logging.getLogger(__name__)

app = Flask(__name__)
_root: Optional[str] = None

Row = Dict[str, Union[str, int]]


def complete_rows(query: str, source: str, root: Optional[str] = None,
                  k: int = TOP_K, settings: Optional[Settings] = None) -> List[Row]:
    """
    Run one non-interactive completion: fetch everything ``source`` has
    (at most FETCH_TICK_LIMIT ticks), rank it for ``query`` and return the
    best ``k`` rows. Raises ValueError for an unknown source.
    """
    view = CompleterView(make_completer(source, root=root), settings)
    try:
        ticks = 0
        while ticks < FETCH_TICK_LIMIT:
            view.fetch_completions()
            ticks += 1
            if view.fetching_finished():
                break
        else:
            log.warning("source %s still fetching after %d ticks", source, ticks)
        view.set_query(query)
        rows: List[Row] = []
        for i in range(min(max(k, 0), len(view))):
            completion, score = view.completion_at(i)
            rows.append({
                "result": completion.result_string(),
                "display": completion.display_string(),
                "score": score,
            })
        return rows
    finally:
        view.close()


# ---------- API ----------
@app.get("/api/complete")
def api_complete():
    q = request.args.get("q", "", type=str)
    source = request.args.get("source", "fs", type=str)
    root = request.args.get("root", None, type=str) or _root
    k = request.args.get("k", TOP_K, type=int)
    try:
        rows = complete_rows(q, source, root=root, k=k)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(rows)


@app.get("/api/health")
def api_health():
    return jsonify({"ok": True})


# ---------- UI ----------
@app.get("/")
def home():
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Completers</title>
<style>
:root{ --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6; --accent:#6ee7ff; --border:#1c2530; }
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink); font:16px/1.45 system-ui,sans-serif; }
.container{ max-width:980px; margin:24px auto; padding:0 16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px; }
h1{ font-size:20px; margin:0 0 8px 0; }
.controls{ display:flex; gap:12px; align-items:center; flex-wrap:wrap; }
.controls input, .controls select{
  padding:10px 12px; border-radius:10px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); font-size:15px;
}
#q{ flex:1; min-width:240px }
.meta{ color:var(--muted); font-size:13px; margin-top:6px; }
.row{ display:grid; grid-template-columns:3rem 4rem 1fr; gap:10px; padding:8px 14px; border-top:1px solid var(--border); }
.mono{ font-family: ui-monospace, Menlo, Consolas, monospace }
.small{ color:var(--muted) }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Completers</h1>
      <div class="controls">
        <input id="q" type="text" placeholder="Type to search…" autocomplete="off" autofocus />
        <select id="source">
          <option value="fs">fs</option>
          <option value="branches">branches</option>
          <option value="numbers">numbers</option>
        </select>
      </div>
      <div id="stats" class="meta">Ready.</div>
      <div id="out"></div>
    </div>
  </div>
<script>
const $ = (sel) => document.querySelector(sel);
const q = $("#q"), source = $("#source"), out = $("#out"), stats = $("#stats");
let t;
function esc(s){ return String(s).replace(/[&<>"]/g, (c)=>({"&":"&amp;","<":"&lt;",">":"&gt;",'"':"&quot;"}[c])); }

async function search(){
  const url = `/api/complete?q=${encodeURIComponent(q.value)}&source=${source.value}`;
  try{
    const resp = await fetch(url);
    if(!resp.ok) throw new Error(`HTTP ${resp.status}`);
    const data = await resp.json();
    stats.textContent = `Results: ${data.length}`;
    out.innerHTML = data.map((r,i)=>`
      <div class="row" title="${esc(r.result)}">
        <div class="small">${i+1}</div>
        <div class="small mono">${r.score}</div>
        <div class="mono">${esc(r.display)}</div>
      </div>`).join("");
  }catch(e){
    stats.textContent = `Error: ${e.message ?? e}`;
  }
}

function debouncedSearch(){
  clearTimeout(t);
  t = setTimeout(search, 150);
}

q.addEventListener("input", debouncedSearch);
source.addEventListener("change", search);
search();
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the Flask UI on top of the completers engine")
    ap.add_argument("--root", default=".", help="Directory the sources complete in")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    global _root
    _root = args.root
    app.run(host=args.host, port=args.port, debug=args.verbose)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

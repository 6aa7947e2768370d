import json
from datetime import datetime, timezone
import os
from jinja2 import Template

HTML_TEMPLATE = """
<!doctype html>
<html>
<head>
<meta charset="utf-8"/>
<title>adstool - Stream Report</title>
<style>
body{font-family: Arial, sans-serif; margin:20px}
table{border-collapse:collapse;width:100%}
th,td{border:1px solid #ccc;padding:8px;text-align:left}
th{background:#f5f5f5}
.failed{background:#ffdddd}
</style>
</head>
<body>
<h1>adstool - Stream Report</h1>
<p>Generated at: {{generated_at}}</p>
<h2>Summary</h2>
<ul>
<li>Files: {{summary.total_files}}</li>
<li>Skipped directories: {{summary.skipped}}</li>
<li>Files with named streams: {{summary.with_named_streams}}</li>
<li>Named streams: {{summary.named_streams}}</li>
<li>Errors: {{summary.errors}}</li>
</ul>

{% for f in files %}
<h2>{{f.path}}</h2>
{% if f.skipped %}<p>Directory, skipped.</p>{% endif %}
{% if f.error %}<p class="failed">{{f.error.message}} {{f.error.cause or ''}}</p>{% endif %}
{% if f.streams %}
<table>
<tr><th>Host file</th><th>Stream</th><th>Length</th></tr>
{% for s in f.streams %}
<tr><td>{{s.hostFile}}</td><td>{{s.streamName}}</td><td>{{s.length}}</td></tr>
{% endfor %}
</table>
{% endif %}
{% if f.operation %}
<h3>{{f.operation.operation}}</h3>
{% if f.operation.error %}<p class="failed">{{f.operation.error.message}} {{f.operation.error.cause or ''}}</p>{% endif %}
<ul>
{% for o in f.operation.outcomes %}
<li class="{{'failed' if o.outcome == 'failed' else ''}}">{{o.stream}}: {{o.outcome}}{% if o.target %} ({{o.target}}){% endif %}</li>
{% endfor %}
</ul>
{% endif %}
{% endfor %}
</body>
</html>
"""


def summarize(file_reports):
    named = [sum(1 for s in r.streams if not s.is_primary) for r in file_reports]
    return {
        "total_files": len(file_reports),
        "skipped": sum(1 for r in file_reports if r.skipped),
        "with_named_streams": sum(1 for n in named if n),
        "named_streams": sum(named),
        "errors": sum(1 for r in file_reports if not r.ok),
    }


def generate_reports(file_reports, out_basename="ads_report", reports_dir=None):
    reports_dir = reports_dir or os.path.join(os.getcwd(), "reports")
    os.makedirs(reports_dir, exist_ok=True)
    now = datetime.now(timezone.utc)
    ts = now.strftime("%Y%m%dT%H%M%SZ")
    json_path = os.path.join(reports_dir, f"{out_basename}_{ts}.json")
    html_path = os.path.join(reports_dir, f"{out_basename}_{ts}.html")

    payload = {
        "generated_at": now.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "summary": summarize(file_reports),
        "files": [r.to_dict() for r in file_reports],
    }

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    tpl = Template(HTML_TEMPLATE, autoescape=True)
    html = tpl.render(generated_at=payload["generated_at"], summary=payload["summary"], files=payload["files"])
    with open(html_path, "w", encoding="utf-8") as f:
        f.write(html)
    return {"json": json_path, "html": html_path}

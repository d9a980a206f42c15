from models import MediaResource

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>The Home Row</title>
  <style>
    body {{
      margin: 0;
      min-height: 100vh;
      display: flex;
      flex-direction: column;
      align-items: center;
      justify-content: center;
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: linear-gradient(135deg, #4a90d9 0%, #2d5a87 100%);
      color: white;
    }}
    video {{ max-width: 100%; width: 800px; border-radius: 8px; }}
    .branding {{ position: fixed; top: 20px; right: 20px; font-size: 1.5rem; font-weight: 700; }}
    .footer {{ margin-top: 2rem; font-size: 0.9rem; opacity: 0.7; }}
  </style>
</head>
<body>
  <div class="branding">typing.com</div>
  <h1>The Home Row</h1>
  <p>Learn proper finger placement for touch typing</p>
  <video controls autoplay>
    <source src="/{route}" type="{content_type}">
    Your browser does not support the video tag.
  </video>
  <p class="footer">Built with Remotion | typing.com Video POC</p>
</body>
</html>
"""


def render_page(resource: MediaResource) -> str:
    """HTML shell embedding the media route in a video element"""
    return PAGE_TEMPLATE.format(route=resource.route, content_type=resource.content_type)

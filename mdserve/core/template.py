# Page template used by DefaultRenderer. Rendered with Jinja2 (autoescaped);
# `doc` is the MarkdownFile, whose `body` and `toc` are already safe markup.

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
	<meta charset="utf-8">
	<meta name="viewport" content="width=device-width, initial-scale=1">
	<title>{{ doc.title }}</title>
	<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@4.6.2/dist/css/bootstrap.min.css">
	<link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/github-markdown-css/2.9.0/github-markdown.min.css">
	<style>
		.markdown-body {
			box-sizing: border-box;
			min-width: 200px;
			max-width: 980px;
			margin: 0 auto;
			padding: 45px;
		}

		.toc-sidebar {
			position: sticky;
			top: 0;
			max-height: 100vh;
			overflow-y: auto;
			padding-top: 45px;
			font-size: 0.875rem;
		}

		.toc-sidebar .nav .nav {
			padding-left: 1rem;
		}

		.toc-sidebar .nav-link {
			padding: 0.2rem 0.5rem;
		}

		.document-footer {
			margin-top: 3rem;
			color: #6a737d;
			font-size: 0.8rem;
		}

		@media (max-width: 767px) {
			.markdown-body {
				padding: 15px;
			}
		}
	</style>
</head>

<body>
	<div class="container-fluid">
		<div class="row">
			{% if doc.toc %}
			<aside class="col-md-3 d-none d-md-block toc-sidebar">
				{{ doc.toc }}
			</aside>
			<main class="col-md-9">
			{% else %}
			<main class="col-md-12">
			{% endif %}
				<article class="markdown-body">
					{{ doc.body }}
					<footer class="document-footer">
						{{ doc.file_info.name }} &middot; last modified {{ doc.file_info.mod_time.strftime('%Y-%m-%d %H:%M:%S') }}
					</footer>
				</article>
			</main>
		</div>
	</div>
</body>
</html>
"""

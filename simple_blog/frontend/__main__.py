from simple_blog.frontend.app import run

run()

__version__ = '0.1'

import os

from setuptools import setup, find_packages

here = os.path.abspath(os.path.dirname(__file__))
README = open(os.path.join(here, 'README.rst')).read()
CHANGES = open(os.path.join(here, 'CHANGES.rst')).read()

setup(name='jobhooks',
      version=__version__,
      description='Job lifecycle hooks',
      long_description=README + '\n\n' +  CHANGES,
      classifiers=[
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        ],
      keywords='job queue hooks worker',
      license="MIT",
      packages=find_packages(),
      include_package_data=True,
      zip_safe=False,
      python_requires='>=3.6',
      install_requires=[],
      extras_require={
          'testing': ['pytest', 'mock'],
      },
      entry_points="""
      [console_scripts]
      jobhooks-perform = jobhooks.job:run_job

      """
)
